from repaste_bot.cli import app

app()
