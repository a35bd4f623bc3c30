from gpsfix.cli import main

main()
