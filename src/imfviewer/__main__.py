from typer import Typer

from imfviewer.cli.viewer import locate, run

app = Typer(
    name="imf-viewer",
    help="Native desktop viewer for .imf containers",
    no_args_is_help=False,
)

app.command(name="run", help="Start the sidecar and open the viewer window")(run)
app.command(name="locate", help="Show which imf binary would be launched")(locate)


def main():
    app()


if __name__ == "__main__":
    main()
