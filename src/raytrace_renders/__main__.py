from raytrace_renders.main import main

if __name__ == "__main__":
    main()
