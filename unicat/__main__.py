"""
CLI entry point, when used as a module: `python -m unicat`.

Useful for debugging in the IDEs (use the start-mode "Module", module "unicat").
"""
from unicat import cli

if __name__ == '__main__':
    cli.main()
