from importlib import resources


def load_cheatsheet() -> str:
    with resources.files(__package__).joinpath("data/LABELS.md").open("r", encoding="utf-8") as fh:
        return fh.read()


def load_example_scene() -> str:
    with resources.files(__package__).joinpath("data/example_scene.toml").open("r", encoding="utf-8") as fh:
        return fh.read()
