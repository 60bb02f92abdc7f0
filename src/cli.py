from datetime import datetime
from typing import List, Optional
import argparse
import logging
import sys

from src.cache.file_cache import FileCache
from src.coingecko_api.client import CoinGeckoAPIError, CoinGeckoClient
from src.config import Settings, load_settings
from src.converter.amounts import InvalidAmountError, parse_amount, rub_to_ton, ton_to_rub
from src.converter.rate_service import RateService
from src.utils.chart import NoDataError, print_price_chart

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    # stdout is reserved for command output
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr
    )


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(prog='tonrub', description='TON/RUB currency converter')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')
    # Also accepted after the command; SUPPRESS keeps a flag given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--verbose', action='store_true', default=argparse.SUPPRESS,
                        help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    subparsers.add_parser('rate', parents=[common], help='Show the current rate (1 TON in RUB)')
    ton_parser = subparsers.add_parser('ton-to-rub', parents=[common], help='Convert AMOUNT TON to RUB')
    ton_parser.add_argument('amount', help='Amount in TON, e.g. 12.5 or 12,5')
    rub_parser = subparsers.add_parser('rub-to-ton', parents=[common], help='Convert AMOUNT RUB to TON')
    rub_parser.add_argument('amount', help='Amount in RUB, e.g. 1000 or "1 000,50"')
    subparsers.add_parser('graph', parents=[common], help="Show this year's rate chart")

    return parser.parse_args(argv)


def build_service(settings: Settings) -> RateService:
    client = CoinGeckoClient(base_url=settings.api_url, timeout=settings.request_timeout)
    return RateService(
        client=client,
        cache=FileCache(settings.cache_dir),
        timezone=settings.timezone,
        rate_ttl=settings.rate_ttl,
        history_ttl=settings.history_ttl,
    )


def run_command(args, service: RateService, settings: Settings):
    if args.command == 'rate':
        rate = service.get_rate()
        print(f"💰 1 TON = {rate:.2f} RUB")

    elif args.command == 'ton-to-rub':
        amount = parse_amount(args.amount)
        rate = service.get_rate()
        result = ton_to_rub(amount, rate)
        print(f"{amount:.2f} TON = {result:.2f} RUB (rate: {rate:.2f})")

    elif args.command == 'rub-to-ton':
        amount = parse_amount(args.amount)
        rate = service.get_rate()
        result = rub_to_ton(amount, rate)
        print(f"{amount:.2f} RUB = {result:.2f} TON (rate: {rate:.2f})")

    elif args.command == 'graph':
        now = datetime.now(settings.timezone)
        samples = service.get_yearly_samples(now)
        print_price_chart(samples, now.year)


def main(argv: Optional[List[str]] = None, service: Optional[RateService] = None) -> int:
    args = parse_arguments(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        configure_logging('INFO')
        logger.error(f"Invalid configuration: {str(e)}")
        return 1

    configure_logging('DEBUG' if args.verbose else settings.log_level)
    service = service or build_service(settings)

    try:
        run_command(args, service, settings)
    except InvalidAmountError as e:
        logger.error(str(e))
        return 1
    except CoinGeckoAPIError as e:
        logger.error(f"Could not get TON/RUB prices: {str(e)}")
        return 1
    except NoDataError:
        logger.error("No data to display")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
