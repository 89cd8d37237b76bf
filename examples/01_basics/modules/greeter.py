"""Greets on start. Has no stop: its stop slot is always clean."""

from appmods import Module


class Greeter(Module):
    def set_cli(self, parser):
        parser.add_argument("--name", default="world", help="who to greet")

    def start(self):
        self.lg.info(self.config["greeting"], extra={"name": self.app.args.name})
        return self.app.args.name
