from contextor.cli import app

app()
