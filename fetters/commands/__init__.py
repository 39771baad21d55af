"""One module per command family; cli.py dispatches to them."""
