from pitchperfect_web.app import main

main()
