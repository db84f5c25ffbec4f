from attracting_cycle import estimate_contraction_rate, find_attracting_cycle, verify_periodicity
from attracting_cycle.maps import newton, quadratic


def main() -> None:
    rabbit = quadratic(complex(-0.122561166876654, 0.744861766619744))
    r = find_attracting_cycle(0j, rabbit, tol=1e-10)

    print("Douady rabbit")
    print("-------------")
    print(f"period: {r.period}")
    print(f"representative: {r.representative:.12f}")
    print(f"ratio: {r.ratio:.3e}")
    print(f"|F^p(a) - a|: {verify_periodicity(rabbit, r).distance:.3e}")

    F = quadratic(-0.5)
    fit = estimate_contraction_rate(0j, F, n_samples=20, burn_in=20)
    print("\nz^2 - 1/2")
    print("---------")
    print(f"fitted contraction rate: {fit.rate:.6f} (r={fit.r_value:.4f})")

    r = find_attracting_cycle(1 + 1j, newton(3))
    print("\nNewton map for z^3 - 1")
    print("----------------------")
    print(f"root: {r.representative:.15f} (period {r.period}, tol {r.tol:g})")


if __name__ == "__main__":
    main()
