"""Static keyword, entity and stopword tables used for scoring and extraction.

Tables are built once and shared. A YAML file may replace any table; keys it
omits keep their built-in values.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from relation_radar.text import tr_lower

# fmt: off
INSTITUTION_KEYWORDS: tuple[str, ...] = (
    "hükümet", "bakanlık", "bakan", "cumhurbaşkanı", "başbakan", "meclis",
    "milletvekil", "kamu", "devlet", "ihale", "teşvik", "destek", "fon", "kredi",
    "vergi", "muafiyet", "imtiyaz", "protokol", "anlaşma", "sözleşme", "izin",
    "ruhsat", "yetki", "karar", "kanun", "yönetmelik", "tebliğ", "genelge",
    "düzenleme", "komisyon", "kurul", "müdürlük", "bakanlığı", "başkanlığı",
    "müsteşarlık", "genel müdürlük", "toki", "kik", "hazine",
)

PARTY_KEYWORDS: tuple[str, ...] = (
    "akp", "ak parti", "adalet ve kalkınma partisi", "erdoğan",
    "recep tayyip erdoğan", "rte", "binali yıldırım", "ahmet davutoğlu",
    "partili", "iktidar partisi", "cumhur ittifakı", "soylu", "albayrak",
    "berat albayrak", "süleyman soylu",
)

POLITICAL_FIGURES: tuple[str, ...] = (
    "Erdoğan", "Recep Tayyip Erdoğan", "Binali Yıldırım", "Ahmet Davutoğlu",
    "Berat Albayrak", "Süleyman Soylu", "Mehmet Şimşek", "Mevlüt Çavuşoğlu",
    "Hulusi Akar", "Fahrettin Koca", "Abdulhamit Gül", "Bekir Bozdağ",
)

INSTITUTION_ENTITIES: tuple[str, ...] = (
    "Cumhurbaşkanlığı", "Başbakanlık", "Hazine ve Maliye Bakanlığı",
    "Sanayi ve Teknoloji Bakanlığı", "Ticaret Bakanlığı",
    "Ulaştırma ve Altyapı Bakanlığı", "Enerji ve Tabii Kaynaklar Bakanlığı",
    "TOKİ", "KİK", "Varlık Fonu", "TMSF", "Merkez Bankası", "TÜBİTAK",
)

PARTY_ENTITIES: tuple[str, ...] = (
    "AKP", "AK Parti", "Adalet ve Kalkınma Partisi", "Erdoğan",
    "Recep Tayyip Erdoğan", "Binali Yıldırım", "Ahmet Davutoğlu",
    "Berat Albayrak", "Süleyman Soylu", "AKP Genel Merkezi", "Cumhur İttifakı",
)

# fmt: on

STOPWORDS: frozenset[str] = frozenset(
    """
    acaba altı altmış ama ancak arada artık asla aslında aşağı ayrıca bana bazen
    bazı bazıları belki ben benden beni benim beş bile bilhassa bin bir biraz
    birçoğu birçok biri birisi birkaç birşey biz bizden bize bizi bizim böyle
    böylece bu buna bunda bundan bunlar bunları bunların bunu bunun burada bütün
    çoğu çoğunu çok çünkü da daha dahi dan de defa değil diğer diğeri diğerleri
    diye doksan dokuz dolayı dolayısıyla dört e elbette elli en fakat falan felan
    filan gene gibi görece göre hala halde halen hangi hangisi hani hatta hem
    henüz hep hepsi her herhangi herkes herkese herkesi herkesin hiç hiçbir
    hiçbiri i için içinde iki ile ilgili ise işte kaç kadar kendi kendine kendini
    kendisi kendisine kendisini kez ki kim kime kimi kimin kimisi kırk madem mi
    mı mu mü nasıl ne neden nedenle nerde nerede nereye nesi neyse niçin nin nın
    niye nun nün o öbür olan olarak oldu olduğu olduğunu olduklarını olmadı
    olmadığı olmak olması olmayan olmaz olsa olsun olup olur olursa oluyor on ön
    ona önce ondan onlar onlara onlardan onları onların onu onun orada öte ötürü
    otuz öyle oysa pek rağmen sana sanki şayet şekilde sekiz seksen sen senden
    seni senin şey şeyden şeye şeyi şeyler şimdi siz sizden size sizi sizin son
    sonra şöyle şu şuna şunda şundan şunlar şunu şunun ta tabii tam tamam tamamen
    tarafından tüm tümü u ü üç un ün up üzere var vardı ve veya ya yani yapacak
    yapılan yapılması yapıyor yapmak yaptı yaptığı yaptığını yaptıkları ye yedi
    yerine yetmiş yi yı yine yirmi yoksa yu yüz zaten zira
    """.split()
)


@dataclass(frozen=True)
class Lexicon:
    """Immutable set of lookup tables.

    Keyword tables are stored Turkish-lower-cased; entity and figure names keep
    their display casing and are folded at match time.
    """

    institution_keywords: tuple[str, ...] = INSTITUTION_KEYWORDS
    party_keywords: tuple[str, ...] = PARTY_KEYWORDS
    political_figures: tuple[str, ...] = POLITICAL_FIGURES
    institution_entities: tuple[str, ...] = INSTITUTION_ENTITIES
    party_entities: tuple[str, ...] = PARTY_ENTITIES
    stopwords: frozenset[str] = STOPWORDS

    @property
    def relation_keywords(self) -> tuple[str, ...]:
        """Institution and party keywords together."""
        return self.institution_keywords + self.party_keywords


DEFAULT_LEXICON = Lexicon()

_KEYWORD_TABLES = {"institution_keywords", "party_keywords", "stopwords"}


def _coerce_table(name: str, values: Any) -> tuple[str, ...] | frozenset[str]:
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ValueError(f"Lexicon table {name!r} must be a list of strings")
    if name in _KEYWORD_TABLES:
        values = [tr_lower(v) for v in values]
    if name == "stopwords":
        return frozenset(values)
    return tuple(values)


def load_lexicon(path: Path | str, base: Lexicon = DEFAULT_LEXICON) -> Lexicon:
    """Load table overrides from a YAML mapping of table name to list of strings.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file names an unknown table or a table is not a string list.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Lexicon file {path} must contain a mapping")

    known = {f.name for f in fields(Lexicon)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"Unknown lexicon tables: {', '.join(sorted(unknown))}")

    overrides = {name: _coerce_table(name, values) for name, values in raw.items()}
    return replace(base, **overrides)
