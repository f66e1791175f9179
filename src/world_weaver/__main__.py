from world_weaver.main import main

main()
