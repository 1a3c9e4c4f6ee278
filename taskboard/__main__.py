from taskboard.app import main

main()
