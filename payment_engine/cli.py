import argparse
import logging
import sys

from payment_engine.engine import AccountEngine
from payment_engine.export import snapshot, write_csv
from payment_engine.reader import read_transactions

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="payment-engine",
        description="Apply a CSV of transactions and print the resulting account balances as CSV.",
    )
    parser.add_argument("input", help="transaction CSV file")
    parser.add_argument("--log-file", default="log.txt", help="diagnostics destination (default: %(default)s)")
    parser.add_argument(
        "--log-level",
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="minimum level written to the log file (default: %(default)s)",
    )
    return parser.parse_args(argv)


def setup_logging(log_file, level):
    handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("payment_engine")
    root.addHandler(handler)
    root.setLevel(level)
    return handler


def main(argv=None, stdout=None):
    args = parse_args(argv)
    stdout = stdout if stdout is not None else sys.stdout
    package_logger = logging.getLogger("payment_engine")
    previous_level = package_logger.level

    try:
        handler = setup_logging(args.log_file, args.log_level)
    except OSError as e:
        print(f"unable to open log file {args.log_file}: {e}", file=sys.stderr)
        return 1

    try:
        try:
            # undecodable bytes become U+FFFD and fail the row's own field parsing
            input_file = open(args.input, newline="", encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"unable to open input file {args.input}: {e}", file=sys.stderr)
            return 1

        logger.info("start payment engine on %s", args.input)
        engine = AccountEngine()
        status = 0
        with input_file:
            try:
                engine.run(read_transactions(input_file))
            except OSError as e:
                # every applied record is complete, so the partial snapshot is still valid
                logger.error("input stream ended early: %s", e)
                print(f"error reading input file {args.input}: {e}", file=sys.stderr)
                status = 1
        write_csv(snapshot(engine.accounts), stdout)
        logger.info("wrote %d accounts", len(engine.accounts))
        return status
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)
        handler.close()
