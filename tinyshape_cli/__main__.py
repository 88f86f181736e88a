from tinyshape_cli.cli import main

main()
