from ctags_lsp.lsp.server import main

main()
