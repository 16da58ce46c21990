from rich.pretty import pprint

from clack import *

__prog__ = "main"


def greet(params):
    name = params["name"].as_string()
    times = params["times"].as_integer()
    for _ in range(times):
        console.println(("HELLO %s!" if params["loud"].as_boolean() else "Hello %s") % name)


def report(error, message, /):
    console.eprint(message)
    console.stderr.print(error)
    return None


app = (
    App("main")
    .set_version("0.1.0")
    .set_description("a small greeting program")
    .set_error_handler(report)
    .add_command(
        Command("foo")
        .set_description("greets someone")
        .add_argument(Argument("name", ValueType.STRING).set_short("n").set_description("who to greet").set_required())
        .add_argument(Argument("times", ValueType.INTEGER).set_short("t").set_default(Value.integer(1)))
        .add_flag(Flag("loud").set_short("l").set_description("shout the greeting"))
        .set_handler(greet)
    )
    .build()
)


if __name__ == '__main__':
    console.configure_logging()
    pprint(app.root)
    app.run()
