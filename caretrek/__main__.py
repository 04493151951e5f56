from caretrek.cli import main

main()
