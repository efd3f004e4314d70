"""Reference artist catalog and corpus planning."""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

from ..io.models import ReferenceArtwork

logger = logging.getLogger(__name__)

_IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".webp")
_WORK_NUMBER = re.compile(r"_(\d+)$")


@dataclass(frozen=True, slots=True)
class ArtistProfile:
    """Static metadata for an artist in the reference dataset."""

    name: str
    genre: str
    nationality: str
    born: int
    died: int

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ")


def _artist(name: str, genre: str, nationality: str, years: str) -> ArtistProfile:
    born, died = (int(part) for part in years.split("-"))
    return ArtistProfile(name, genre, nationality, born, died)


ARTISTS: tuple[ArtistProfile, ...] = (
    _artist("Albrecht_Dürer", "Northern Renaissance", "German", "1471-1528"),
    _artist("Alfred_Sisley", "Impressionism", "French", "1839-1899"),
    _artist("Amedeo_Modigliani", "Modernism", "Italian", "1884-1920"),
    _artist("Andrei_Rublev", "Medieval", "Russian", "1360-1430"),
    _artist("Andy_Warhol", "Pop Art", "American", "1928-1987"),
    _artist("Camille_Pissarro", "Impressionism", "French", "1830-1903"),
    _artist("Caravaggio", "Baroque", "Italian", "1571-1610"),
    _artist("Claude_Monet", "Impressionism", "French", "1840-1926"),
    _artist("Diego_Rivera", "Mexican Muralism", "Mexican", "1886-1957"),
    _artist("Diego_Velazquez", "Baroque", "Spanish", "1599-1660"),
    _artist("Edgar_Degas", "Impressionism", "French", "1834-1917"),
    _artist("Edouard_Manet", "Realism", "French", "1832-1883"),
    _artist("Edvard_Munch", "Expressionism", "Norwegian", "1863-1944"),
    _artist("El_Greco", "Mannerism", "Greek", "1541-1614"),
    _artist("Eugene_Delacroix", "Romanticism", "French", "1798-1863"),
    _artist("Francisco_Goya", "Romanticism", "Spanish", "1746-1828"),
    _artist("Frida_Kahlo", "Surrealism", "Mexican", "1907-1954"),
    _artist("Georges_Seurat", "Pointillism", "French", "1859-1891"),
    _artist("Giotto_di_Bondone", "Medieval", "Italian", "1267-1337"),
    _artist("Gustav_Klimt", "Art Nouveau", "Austrian", "1862-1918"),
    _artist("Gustave_Courbet", "Realism", "French", "1819-1877"),
    _artist("Henri_de_Toulouse-Lautrec", "Post-Impressionism", "French", "1864-1901"),
    _artist("Henri_Matisse", "Fauvism", "French", "1869-1954"),
    _artist("Henri_Rousseau", "Naïve Art", "French", "1844-1910"),
    _artist("Hieronymus_Bosch", "Northern Renaissance", "Dutch", "1450-1516"),
    _artist("Jackson_Pollock", "Abstract Expressionism", "American", "1912-1956"),
    _artist("Jan_van_Eyck", "Northern Renaissance", "Flemish", "1390-1441"),
    _artist("Joan_Miro", "Surrealism", "Spanish", "1893-1983"),
    _artist("Kazimir_Malevich", "Suprematism", "Russian", "1879-1935"),
    _artist("Leonardo_da_Vinci", "High Renaissance", "Italian", "1452-1519"),
    _artist("Marc_Chagall", "Modernism", "Russian", "1887-1985"),
    _artist("Michelangelo", "High Renaissance", "Italian", "1475-1564"),
    _artist("Mikhail_Vrubel", "Symbolism", "Russian", "1856-1910"),
    _artist("Pablo_Picasso", "Cubism", "Spanish", "1881-1973"),
    _artist("Paul_Cezanne", "Post-Impressionism", "French", "1839-1906"),
    _artist("Paul_Gauguin", "Post-Impressionism", "French", "1848-1903"),
    _artist("Paul_Klee", "Expressionism", "Swiss", "1879-1940"),
    _artist("Peter_Paul_Rubens", "Baroque", "Flemish", "1577-1640"),
    _artist("Pierre-Auguste_Renoir", "Impressionism", "French", "1841-1919"),
    _artist("Piet_Mondrian", "De Stijl", "Dutch", "1872-1944"),
    _artist("Pieter_Bruegel", "Northern Renaissance", "Flemish", "1525-1569"),
    _artist("Raphael", "High Renaissance", "Italian", "1483-1520"),
    _artist("Rembrandt", "Baroque", "Dutch", "1606-1669"),
    _artist("Rene_Magritte", "Surrealism", "Belgian", "1898-1967"),
    _artist("Salvador_Dali", "Surrealism", "Spanish", "1904-1989"),
    _artist("Sandro_Botticelli", "Early Renaissance", "Italian", "1445-1510"),
    _artist("Titian", "High Renaissance", "Italian", "1488-1576"),
    _artist("Vasiliy_Kandinskiy", "Abstract Art", "Russian", "1866-1944"),
    _artist("Vincent_van_Gogh", "Post-Impressionism", "Dutch", "1853-1890"),
    _artist("William_Turner", "Romanticism", "British", "1775-1851"),
)

ARTISTS_BY_NAME: Dict[str, ArtistProfile] = {artist.name: artist for artist in ARTISTS}


def plan_reference_corpus(
    root: str | Path,
    rng: random.Random | None = None,
    min_works: int = 5,
    max_works: int = 15,
    artists: Sequence[ArtistProfile] = ARTISTS,
) -> List[ReferenceArtwork]:
    """Return a synthetic corpus plan of numbered works for every artist.

    Each artist gets between *min_works* and *max_works* entries pointing at
    ``<root>/<Artist>/<Artist>_<n>.jpg`` with a year drawn from the artist's
    lifetime. Images that do not exist are dropped later, during the build.
    """
    if min_works < 1 or max_works < min_works:
        raise ValueError("Expected 1 <= min_works <= max_works")
    rng = rng if rng is not None else random.Random()
    base = Path(root)

    plan: List[ReferenceArtwork] = []
    for artist in artists:
        count = rng.randint(min_works, max_works)
        for number in range(1, count + 1):
            plan.append(
                ReferenceArtwork(
                    artist=artist.display_name,
                    artwork=f"Artwork {number}",
                    image_ref=str(base / artist.name / f"{artist.name}_{number}.jpg"),
                    year=str(rng.randint(artist.born, artist.died)),
                    genre=artist.genre,
                    nationality=artist.nationality,
                )
            )
    return plan


def discover_reference_corpus(
    root: str | Path, rng: random.Random | None = None
) -> List[ReferenceArtwork]:
    """Return one :class:`ReferenceArtwork` per image found under *root*.

    Images are expected in one directory per artist. Directories matching a
    catalog artist inherit its genre, nationality and a plausible year.
    """
    base = Path(root)
    if not base.is_dir():
        raise FileNotFoundError(f"Corpus directory does not exist: {base}")
    rng = rng if rng is not None else random.Random()

    plan: List[ReferenceArtwork] = []
    for artist_dir in sorted(path for path in base.iterdir() if path.is_dir()):
        profile = ARTISTS_BY_NAME.get(artist_dir.name)
        images = sorted(
            path for path in artist_dir.iterdir() if path.suffix.lower() in _IMAGE_SUFFIXES
        )
        for image_path in images:
            match = _WORK_NUMBER.search(image_path.stem)
            artwork = f"Artwork {match.group(1)}" if match else image_path.stem
            plan.append(
                ReferenceArtwork(
                    artist=artist_dir.name.replace("_", " "),
                    artwork=artwork,
                    image_ref=str(image_path),
                    year=str(rng.randint(profile.born, profile.died)) if profile else None,
                    genre=profile.genre if profile else None,
                    nationality=profile.nationality if profile else None,
                )
            )
    logger.debug("Discovered %d reference images under %s", len(plan), base)
    return plan
