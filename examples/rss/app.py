"""Podcast RSS feed -- file templates, fragments and converters.

The channel template has a ``{..items}`` slot; every episode is the item
template bound to its own values. Pass ``--pretty`` for indented output.

Run:
    python app.py [--pretty]
"""

import sys
from pathlib import Path

from xmlit import Environment, FileSystemLoader, RenderConfig

EPISODES = [
    "The classic: red fox",
    "Visiting an arctic fox",
    "How big media tries to lure fox enthusiasts into bullshit news",
    "Fennec fox has big ears & a big heart <3",
]

templates_dir = Path(__file__).parent / "templates"
env = Environment(loader=FileSystemLoader(templates_dir))
env.converters[bool] = lambda value: "true" if value else "false"

feed = env.get_template("rss.xml")
item = env.get_template("item.xml")


def make_rss(config: RenderConfig | None = None) -> str:
    items = [
        item.bind(
            title=title,
            guid=f"foxxo-{number}",
            url=f"https://foxxo.tv/episodes/{number}.mp3",
            length=1024 * number,
        )
        for number, title in enumerate(EPISODES, start=1)
    ]
    return feed.render(
        {
            "title": "Foxxo Weekly",
            "link": "https://foxxo.tv/podcast",
            "description": "Your weekly talk about the cutest animal.",
            "explicit": False,
            "cover": "https://foxxo.tv/cover.jpg",
            "feed_url": "https://foxxo.tv/podcast/rss.xml",
            "items": items,
        },
        config=config,
    )


output = make_rss()
pretty_output = make_rss(RenderConfig.pretty())


def main() -> None:
    config = RenderConfig.pretty() if "--pretty" in sys.argv[1:] else None
    print(make_rss(config))


if __name__ == "__main__":
    main()
