"""armdeploy subcommands."""
