from smallsh.shell import main

main()
