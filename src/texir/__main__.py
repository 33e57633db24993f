from texir.cli import run

run()
