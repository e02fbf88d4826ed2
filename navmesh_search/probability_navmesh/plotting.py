import matplotlib.pyplot as plt
from matplotlib.tri import Triangulation
import numpy as np


def plot_probability(navmesh, ax=None, show=True, title='Occupancy probability'):
    ''' Plot the probability of every triangle on the x - z plane, outlining the observed ones and marking the search goal'''
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 10))
    else:
        fig = ax.figure

    topology = navmesh.topology
    ax.set_title(title)
    ax.set_xlabel('x')
    ax.set_ylabel('z')
    ax.set_aspect('equal')
    if topology.triangle_count == 0:
        if not show:
            return fig
        plt.show()
        return fig

    x = topology.vertices[:, 0]
    z = topology.vertices[:, 2]
    collection = ax.tripcolor(x, z, topology.triangles, facecolors=navmesh.field.values,
                              vmin=0.0, vmax=1.0, cmap='viridis', edgecolors='k', linewidth=0.2)
    fig.colorbar(collection, ax=ax, label='probability')

    # outline observed triangles
    observed = list(navmesh.observed)
    if observed:
        ax.triplot(Triangulation(x, z, topology.triangles[np.array(observed)]), color='red', linewidth=1.0, label='Observed')

    # mark the search goal
    goal = navmesh.search_goal()
    ax.scatter(goal[0], goal[2], color='orange', marker='*', s=200, label='Search goal')
    ax.legend()

    if not show:
        return fig
    plt.show()
    return fig
