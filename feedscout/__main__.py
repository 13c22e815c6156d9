from feedscout.cli import main

main()
