from mac_setup.cli import main

main()
