import pytest

from archeomap.core.types import Sample


@pytest.fixture
def culture_samples():
    """Five samples: three dated in 4000-9000, one older, one undated."""
    return [
        Sample("s1", (30.0, 47.0), age=5000.0, culture="Yamnaya"),
        Sample("s2", (2.0, 48.0), age=8000.0, culture="Bell Beaker"),
        Sample("s3", (35.0, 50.0), age=12000.0, culture="Yamnaya"),
        Sample("s4", (15.0, 52.0), age=None, culture="Corded Ware"),
        Sample("s5", (10.0, 45.0), age=6000.0, culture=None),
    ]


@pytest.fixture
def haplotree_samples():
    return [
        Sample("r1", (0.0, 0.0), age=5000.0, y_haplogroup="R1b",
               y_haplotree="R-M207>M173>M343>L754>L389>P297>M269>L23>L51"),
        Sample("i1", (1.0, 1.0), age=4500.0, y_haplogroup="I2",
               y_haplotree="I-M258>M223>L801>CTS616"),
        Sample("g1", (2.0, 2.0), age=7000.0, y_haplogroup="G2a",
               y_haplotree="G-M201>P15>L30>L32>L43>L141"),
        Sample("e1", (3.0, 3.0), age=3000.0, y_haplotree=""),
        Sample("n1", (4.0, 4.0), age=6000.0),
    ]


@pytest.fixture
def genetic_samples():
    """Samples spread over culture, Y-haplogroup, mtDNA and age."""
    return [
        Sample("a", (30.0, 47.0), age=5000.0, culture="Yamnaya", y_haplogroup="R1b", mtdna="U5"),
        Sample("b", (2.0, 48.0), age=4500.0, culture="Bell Beaker", y_haplogroup="R1b", mtdna="H1"),
        Sample("c", (15.0, 52.0), age=4800.0, culture="Corded Ware", y_haplogroup="R1a", mtdna="U5"),
        Sample("d", (20.0, 55.0), age=9000.0, culture="Mesolithic", y_haplogroup="I2", mtdna="U5"),
        Sample("e", (25.0, 40.0), age=None, culture="Yamnaya", y_haplogroup=None, mtdna="H1"),
    ]
