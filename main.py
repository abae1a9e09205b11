from jsm_gateway.cmd.main import main


if __name__ == "__main__":
    main()
