#!/usr/bin/env python3
"""
Точка входа для запуска SiteMirror через командную строку.

Основные опции:
  --url URL           Стартовый URL (обязателен, если не задан в конфиге)
  --dest DIR          Папка для сохранения (default: downloads)
  --max_depth INT     Максимальная глубина; <= 0 – без ограничения (default: -1)

Дополнительно:
  --config PATH       YAML/JSON конфиг, флаги CLI имеют приоритет
  --concurrency INT   Число параллельных воркеров
  --crawl-timeout SEC Таймаут всего обхода (секунд)
  --report PATH       Сохранить JSON-отчёт об обходе
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --version, -v       Показать версию SiteMirror

Пример:
  site-mirror --url example.com --dest downloads --max_depth 2
"""
import asyncio
import sys
from datetime import datetime
from pathlib import Path

import click
from pydantic import ValidationError

from site_mirror import __version__
from site_mirror.config import load_config
from site_mirror.engine import Engine
from site_mirror.errors import ConfigError
from site_mirror.logger import configure
from site_mirror.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _missing_seed(exc: ValidationError) -> bool:
    return any(tuple(err.get("loc", ())) == ("seed_url",) for err in exc.errors())


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMirror, version %(version)s')
@click.option('--url', '-u', 'url', default=None, help='Стартовый URL для зеркалирования.')
@click.option(
    '--dest', '-d', 'dest',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Папка назначения (default: downloads).'
)
@click.option(
    '--max_depth', '--max-depth', 'max_depth',
    type=int, default=None,
    help='Максимальная глубина ссылок; <= 0 – без ограничения.'
)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option('--concurrency', type=click.IntRange(min=1), default=None, help='Число параллельных воркеров.')
@click.option('--timeout', type=float, default=None, help='Таймаут одного запроса (секунд).')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None, help='Таймаут всего обхода (секунд).')
@click.option('--retry-times', 'retry_times', type=click.IntRange(min=0), default=None, help='Повторы при 5xx/429.')
@click.option('--max-pages', 'max_pages', type=click.IntRange(min=1), default=None, help='Лимит числа страниц.')
@click.option('--user-agent', 'user_agent', default=None, help='Заголовок User-Agent.')
@click.option('--strict-host', is_flag=True, help='Сравнивать хосты по компонентам вместо префикса строки.')
@click.option('--merge-schemes', is_flag=True, help='Считать http:// и https:// варианты одним URL.')
@click.option(
    '--resolver',
    type=click.Choice(['flat', 'rfc3986']), default=None,
    help='Разрешение относительных ссылок (default: flat).'
)
@click.option(
    '--report', 'report_path',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только консоль, если не указан)'
)
def cli(url, dest, max_depth, config_path, concurrency, timeout, crawl_timeout, retry_times,
        max_pages, user_agent, strict_host, merge_schemes, resolver, report_path, log_level, log_file):
    """Скачать сайт начиная с --url в папку --dest."""
    configure(level=log_level, log_file=str(log_file) if log_file else None)

    if url is not None and not url.strip():
        raise click.UsageError('Please enter a URL to crawl')

    try:
        cfg = load_config(
            config_path,
            seed_url=url,
            destination=dest,
            max_depth=max_depth,
            concurrency=concurrency,
            timeout=timeout,
            crawl_timeout=crawl_timeout,
            retry_times=retry_times,
            max_pages=max_pages,
            user_agent=user_agent,
            strict_host=True if strict_host else None,
            merge_schemes=True if merge_schemes else None,
            resolver=resolver,
        )
    except ValidationError as e:
        if _missing_seed(e):
            raise click.UsageError('Please enter a URL to crawl')
        print_error(f'Ошибка конфигурации: {e}')
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    started = datetime.now()
    try:
        report = Engine(cfg).run()
    except ConfigError as e:
        print_error(str(e))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {cfg.crawl_timeout} секунд')

    click.echo(f'Pages saved: {len(report.pages)}, errors: {len(report.failures)}')
    click.echo(f'Script start time: {started}')
    click.echo(f'Script end time: {datetime.now()}')

    if report_path:
        try:
            saved = render_json(report, report_path)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')


if __name__ == "__main__":
    cli()
