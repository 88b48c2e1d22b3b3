"""Command-line interface."""
from modelviewport.main import main

if __name__ == "__main__":
    main()
