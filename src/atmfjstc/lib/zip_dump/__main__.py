from atmfjstc.lib.zip_dump.cli import main


main()
