from telegram_bot import main

if __name__ == "__main__":
    main()
