"""Точка входа в приложение."""
from autocropper.app import AutocropperApp
from autocropper.logging_config import setup_logging


def main() -> None:
    """Настраивает логирование, создаёт и запускает главное окно приложения."""
    setup_logging()
    app = AutocropperApp()
    app.mainloop()


if __name__ == "__main__":
    main()
