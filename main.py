import logging

from app import WallpaperApp
import config

def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
    )
    WallpaperApp().run()

if __name__ == "__main__":
    main()
