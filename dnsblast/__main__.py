from dnsblast.main import main

main()
