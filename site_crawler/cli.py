# === FILE: site_crawler/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteCrawler через командную строку.

Команды:
  crawl SEED   Обойти сайт от SEED и вывести отсортированный список URL
  config       Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --json PATH          Сохранить JSON-отчёт в файл
  --pretty             Печатать JSON в stdout с отступом 2
  --crawl-timeout SEC  Ограничение времени обхода; отчёт содержит уже посещённые URL

Дополнительно:
  --version, -v       Показать версию SiteCrawler

Пример:
  site-crawler --log-level DEBUG crawl https://example.com --json crawl.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_crawler import __version__
from site_crawler.config import load_config
from site_crawler.crawler.urls import InvalidSeedError
from site_crawler.engine import start_crawl
from site_crawler.logger import init_logging
from site_crawler.report.json_report import render_json, result_to_dict

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteCrawler, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования (по умолчанию из конфига)'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteCrawler CLI."""
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    init_logging(
        level=log_level or cfg.log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seed')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Печатать JSON-отчёт в stdout (отступ 2) вместо списка URL'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Ограничение времени обхода (секунд), после него пул останавливается с grace-периодом"
)
@click.pass_context
def crawl(ctx, seed, json_output, pretty, crawl_timeout):
    """Обойти сайт от SEED и вывести посещённые URL в отсортированном порядке."""
    cfg = ctx.obj['config']
    try:
        result = asyncio.run(start_crawl(seed, cfg, deadline=crawl_timeout))
    except InvalidSeedError as e:
        print_error(f'Некорректный стартовый URL: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if json_output:
        try:
            saved_json = render_json(result, json_output)
            click.echo(f'JSON report: {saved_json}', err=True)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if not result.drained:
        click.secho(
            f"Обход остановлен досрочно, отчёт неполный ({len(result.urls)} URL)",
            fg="yellow", err=True
        )

    if pretty:
        click.echo(json.dumps(result_to_dict(result), ensure_ascii=False, indent=2))
        return

    for url in result.urls:
        click.echo(url)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
