from git_pr import main

main()
