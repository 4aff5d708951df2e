from clean_code.cli import cli

if __name__ == "__main__":
    cli()
