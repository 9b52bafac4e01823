from titansim import ProbeSimulator, SOLAR_SYSTEM, Vector3d
import plotly.io as pio
import logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
pio.renderers.default = 'browser'

# Probe fired from Earth's surface, velocities relative to Earth
p0 = Vector3d(6.371e6, 0, 0)
v0 = Vector3d(6.0e4, 6.0e4, 0)

sim = ProbeSimulator(SOLAR_SYSTEM, integrator='verlet')

# One year, reported only at the end
year = 31556926
path = sim.trajectory(p0, v0, [0, year])
titan = sim.history[-1].position_of(SOLAR_SYSTEM.index_of('titan'))
print(f"Probe after one year: {path[-1]}")
print(f"Distance to Titan: {path[-1].dist(titan):.3e} m")

# Same launch on a 10000 s grid for playback
sim.trajectory(p0, v0, year, 10000)
print(sim.history)

fig = sim.history.plot_3d()
fig.show()
