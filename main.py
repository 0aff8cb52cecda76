from rich.pretty import pprint

from argwright import *


class GreetArgs:
    name: str = Arg(required=True, position=0)
    times: int = Arg("-n", default=1)


@scaffold(examples=["main.py greet Ada -n 2 -loud"])
class Demo:
    loud: bool

    @action(descr="greet someone")
    def greet(self, arguments: GreetArgs):
        for _ in range(arguments.times):
            print(("hello, %s!" % arguments.name).upper() if self.loud else "hello, %s" % arguments.name)


if __name__ == '__main__':
    pprint(validate(reflect(Demo)))
    invoke(Demo)
