"""
Default Solar System Catalog
============================

Barycentric state of the major Solar System bodies and Titan at
2020-04-01 00:00:00 TDB, in SI units (m, m/s, kg), as used for the
Titan mission studies.

Examples
--------
>>> from titansim import SOLAR_SYSTEM, ProbeSimulator
>>> SOLAR_SYSTEM.earth.name
'Earth'
>>> sim = ProbeSimulator(SOLAR_SYSTEM)
"""
from .bodies import Body, Catalog
from .vector import Vector3d

SUN = Body(
    name='Sun',
    mass=1.988500e30,
    radius=6.957e8,
    position=Vector3d(-6.806783239281648e+08, 1.080005533878725e+09, 6.564012751690170e+06),
    velocity=Vector3d(-1.420511669610689e+01, -4.954714716629277e+00, 3.994237625449041e-01),
    tags=frozenset({'sun', 'star'}),
)

MERCURY = Body(
    name='Mercury',
    mass=3.302e23,
    radius=2.4397e6,
    position=Vector3d(6.047855986424127e+06, -6.801800047868888e+10, -5.702742359714534e+09),
    velocity=Vector3d(3.892585189044652e+04, 2.978342247012996e+03, -3.327964151414740e+03),
    tags=frozenset({'planet'}),
)

VENUS = Body(
    name='Venus',
    mass=4.8685e24,
    radius=6.0518e6,
    position=Vector3d(-9.435345478592035e+10, 5.350359551033670e+10, 6.131453014410347e+09),
    velocity=Vector3d(-1.726404287724406e+04, -3.073432518238123e+04, 5.741783385280979e-04),
    tags=frozenset({'planet'}),
)

EARTH = Body(
    name='Earth',
    mass=5.97219e24,
    radius=6.371e6,
    position=Vector3d(-1.471922101663588e+11, -2.860995816266412e+10, 8.278183193596080e+06),
    velocity=Vector3d(5.427193405797901e+03, -2.931056622265021e+04, 6.575428158157592e-01),
    tags=frozenset({'earth', 'planet', 'launch'}),
)

MOON = Body(
    name='Moon',
    mass=7.349e22,
    radius=1.7374e6,
    position=Vector3d(-1.472343904597218e+11, -2.822578361503422e+10, 1.052790970065631e+07),
    velocity=Vector3d(4.433121605215677e+03, -2.948453614110320e+04, 8.896598225322805e+01),
    tags=frozenset({'moon'}),
)

MARS = Body(
    name='Mars',
    mass=6.4171e23,
    radius=3.3895e6,
    position=Vector3d(-3.615638921529161e+10, -2.167633037046744e+11, -3.687670305939779e+09),
    velocity=Vector3d(2.481551975121696e+04, -1.816368005464070e+03, -6.467321619018108e+02),
    tags=frozenset({'planet'}),
)

JUPITER = Body(
    name='Jupiter',
    mass=1.89813e27,
    radius=6.9911e7,
    position=Vector3d(1.781303138592153e+11, -7.551118436250277e+11, -8.532838524802327e+08),
    velocity=Vector3d(1.255852555185220e+04, 3.622680192790968e+03, -2.958620380112444e+02),
    tags=frozenset({'planet'}),
)

SATURN = Body(
    name='Saturn',
    mass=5.6834e26,
    radius=5.8232e7,
    position=Vector3d(6.328646641500651e+11, -1.358172804527507e+12, -1.578520137930810e+09),
    velocity=Vector3d(8.220842186554890e+03, 4.052137378979608e+03, -3.976224719266916e+02),
    tags=frozenset({'planet'}),
)

TITAN = Body(
    name='Titan',
    mass=1.34553e23,
    radius=2.5747e6,
    position=Vector3d(6.332873118527889e+11, -1.357175556995868e+12, -2.134637041453660e+09),
    velocity=Vector3d(3.056877965721629e+03, 6.125612956428791e+03, -9.523587380845593e+02),
    tags=frozenset({'moon', 'target'}),
)

URANUS = Body(
    name='Uranus',
    mass=8.6813e25,
    radius=2.5362e7,
    position=Vector3d(2.395195786685187e+12, 1.744450959214586e+12, -2.455116324031639e+10),
    velocity=Vector3d(-4.059468635313000e+03, 5.187467354884590e+03, 7.182516236837370e+01),
    tags=frozenset({'planet'}),
)

NEPTUNE = Body(
    name='Neptune',
    mass=1.02413e26,
    radius=2.4622e7,
    position=Vector3d(4.382692942729203e+12, -9.093501655486243e+11, -8.227728929479486e+10),
    velocity=Vector3d(1.068410720964204e+03, 5.354959501569486e+03, -1.343918199987533e+02),
    tags=frozenset({'planet'}),
)

SOLAR_SYSTEM = Catalog([
    SUN, MERCURY, VENUS, EARTH, MOON, MARS,
    JUPITER, SATURN, TITAN, URANUS, NEPTUNE,
])


def solar_system_2020() -> Catalog:
    """
    Solar System catalog at 2020-04-01 00:00.

    Returns the shared module-level Catalog; it is immutable, so callers
    may use it freely across simulators.
    """
    return SOLAR_SYSTEM
