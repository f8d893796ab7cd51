import click

from . import commands


@click.group()
@click.version_option(package_name="geolocation")
def cli():
    pass


cli.add_command(commands.init)
cli.add_command(commands.parse)
cli.add_command(commands.check)
cli.add_command(commands.encode)
cli.add_command(commands.decode)
cli.add_command(commands.locate)

if __name__ == "__main__":
    cli()
