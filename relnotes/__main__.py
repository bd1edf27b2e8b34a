from relnotes.cli.app import main

main()
