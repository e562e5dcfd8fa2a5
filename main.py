"""
main.py — Bootstrap

1. Parse the command line (optional map path, --tuning, --bake)
2. Load the explore scene (tuning + map, spawns the player)
3. Create the app and push the scene
4. Run

    python main.py                       # map from data/tuning.toml
    python main.py data/maps/other.tmj   # explicit map
    python main.py --bake out.nbt        # write the baked map and exit
"""

from __future__ import annotations
import argparse
import sys

from core import tuning
from core.constants import DEFAULT_MAP_PATH
from core.tilemap import MapFormatError, load_map


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Roadside — top-down map explorer")
    parser.add_argument("map", nargs="?", default=None,
                        help="Tiled .tmj/.json map or baked .nbt (default: [map] path in tuning)")
    parser.add_argument("--tuning", metavar="TOML", default=None,
                        help="Tuning file (default: data/tuning.toml)")
    parser.add_argument("--bake", metavar="OUT", default=None,
                        help="Write the loaded map as NBT to OUT and exit")
    parser.add_argument("--width", type=int, default=960)
    parser.add_argument("--height", type=int, default=640)
    return parser.parse_args(argv)


def bake(src: str | None, out: str, tuning_path: str | None = None) -> int:
    from core.nbt import save_map_nbt
    tuning.load(tuning_path)
    doc = load_map(src or tuning.get("map", "path", DEFAULT_MAP_PATH))
    path = save_map_nbt(doc, out)
    print(f"[MAIN] Baked {doc.source} → {path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        if args.bake:
            return bake(args.map, args.bake, args.tuning)

        from scenes.explore_scene import ExploreScene

        # Load before the window exists so a bad file never opens one
        scene = ExploreScene(args.map, tuning_path=args.tuning)
        scene.load()
    except (MapFormatError, FileNotFoundError) as ex:
        print(f"[MAIN] Cannot load map: {ex}")
        return 1
    except tuning.TOMLDecodeError as ex:
        print(f"[MAIN] Bad tuning file {tuning.source()}: {ex}")
        return 1

    from core.app import App

    app = App(title="Roadside", width=args.width, height=args.height)
    app.push_scene(scene)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
