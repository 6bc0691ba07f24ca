# ABOUTME: Bookcase CLI subcommands, one module per command or command family.
