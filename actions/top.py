from . import FW_TOP_INDEX
from .base import ActionBase, command


class TopAction(ActionBase):

    def process(self):
        return self.invoke()

    @command()
    def index(self):
        self.move_flush()
        return self.forward(FW_TOP_INDEX)
