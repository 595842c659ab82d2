from pi.line.cli import main

main()
