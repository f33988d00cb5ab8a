from vis_gen_diff.validation.hyperdrive_diff import main

if __name__ == "__main__":
    raise SystemExit(main())
