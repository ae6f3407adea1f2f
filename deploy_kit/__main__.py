"""Entry point for `python -m deploy_kit`."""

from deploy_kit.tool.deploy_kit import main

if __name__ == "__main__":
    main()
