from tfan.cli.main import main

main()
