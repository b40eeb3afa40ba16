"""Точка входа в приложение."""
from shapefinder.logging_config import setup_logging


def main() -> None:
    """Настраивает логирование, создаёт и запускает главное окно приложения."""
    setup_logging("INFO")
    # импорт здесь: Tk нужен только графическому режиму
    from shapefinder.app import ShapeFinderApp

    app = ShapeFinderApp()
    app.mainloop()


if __name__ == "__main__":
    main()
