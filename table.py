import resource
from diagonalFrobenius import DiagonalFrobenius
from sage.all import ZZ


def get_maxrss():
    # in mb
    return resource.getrusage(resource.RUSAGE_SELF).ru_maxrss / 1024


def generate_row(parameters, Ns):
    a, n, d, p = parameters
    D = DiagonalFrobenius(a, n, d, p, max(Ns))
    times = D.compare(Ns)
    max_memory = get_maxrss() / 1024.0
    return ((n, d, p), times, max_memory)


def generate_row_latex(parameters, Ns):
    (n, d, p), t, _ = generate_row(parameters, Ns)
    lines = []
    lines.append(
        " & ".join([f"$n={n}, d={d}, p={p}$"] + [f"$N={N}$" for N in sorted(t)]) + r"\\"
    )
    lines.append(r"\hline")
    keys = {
        "Congruence": "Congruence classes",
        "Naive": "Naive",
    }
    for k, v in keys.items():
        line = [v]
        for N in sorted(t):
            x = t[N][k]
            if x < 10:
                r = f"{x:.2f}"
            elif x < 100:
                r = f"{x:.1f}"
            else:
                r = f"{int(x)}"
            line.append(r)
        lines.append(" & ".join(line) + r"\\")
    lines.append(r"\hline")
    return "\n".join(lines)


if __name__ == "__main__":
    parameters = [
        ([1, 1, 1], 2, 3, ZZ(101)),
        ([1, 2, 3], 2, 4, ZZ(97)),
        ([1, 1, 2, 3], 3, 4, ZZ(53)),
        ([1, 2, 3, 4, 5], 4, 3, ZZ(31)),
    ]
    Ns = [5, 10, 20, 40]
    for c in parameters:
        print(f"% parameters = {c}")
        print(generate_row_latex(c, Ns))
        print(f"% max memory {get_maxrss()}")
        print("\n")
