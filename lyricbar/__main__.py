from lyricbar.cli import main

main()
