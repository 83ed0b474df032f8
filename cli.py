# cli.py

"""
Точка входа для запуска SiteMirror без установки пакета.

Пример запуска:
    python cli.py --url example.com --dest downloads --max_depth 2
"""
from site_mirror.cli import cli

if __name__ == '__main__':
    cli()
