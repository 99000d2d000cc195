from acetrainer.cli.main import run

run()
