from codecritic.cli.app import app

app(prog_name="codecritic")
