from tessera import Component


class BadgeComponent(Component):
    def __init__(self, label: str):
        self.label = label
