"""
Allow running the package with: python -m glowie

Examples:
    python -m glowie ~/Pictures              # Update index, report exact duplicates
    python -m glowie ~/Pictures --mode both  # ...and near duplicates
    python -m glowie config                  # Show configuration
    python -m glowie config --init           # Create example config file
"""

import sys


def main():
    if len(sys.argv) > 1 and sys.argv[1] == 'config':
        sys.argv.pop(1)
        from .user_config import get_user_config

        config = get_user_config()

        if '--init' in sys.argv or '-i' in sys.argv:
            if config.create_example_config():
                print("Created example configuration file at:")
                print(f"  {config.config_file_path}")
            else:
                print("Failed to create configuration file.")
                sys.exit(1)
        else:
            print(f"Configuration file: {config.config_file_path}")
            if config.config_file_path.exists():
                print("Status: found")
            else:
                print("Status: not found (using defaults)")
                print("\nRun 'python -m glowie config --init' to create one.")

            print("\nCurrent settings:")
            print(f"  db_path: {config.db_path}")
            print(f"  default_workers: {config.default_workers}")
            print(f"  distance_percent: {config.distance_percent}")
            print(f"  keep_policy: {config.keep_policy}")
            print(f"  keep_reversed: {config.keep_reversed}")
            print(f"  include_ignored: {config.include_ignored}")

            from .indexer import has_heif_support

            print("\nImage support:")
            print(f"  HEIC/HEIF: {'enabled' if has_heif_support() else 'not available (pip install pillow-heif)'}")
    else:
        from .cli import main as cli_main
        sys.exit(cli_main())


if __name__ == '__main__':
    main()
