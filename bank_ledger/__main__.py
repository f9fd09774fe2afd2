"""Interactive menu entry point: python -m bank_ledger"""

from .cli import BankingShell
from .config import get_config
from .ledger import Ledger
from .logging_config import configure_from_settings


def main():
    settings = get_config()
    configure_from_settings(settings)
    BankingShell(Ledger(settings)).run()


if __name__ == "__main__":
    main()
