from awsnav.cli.app import cli


def main():
    """Entry point for the awsnav CLI. Delegates to awsnav.cli.app:cli."""
    cli()


if __name__ == "__main__":
    main()
