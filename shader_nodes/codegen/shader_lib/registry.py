"""
TSL Function Registry for Tree-Shaking

Maps helper functions that three/tsl does not ship to their TSL source,
their dependencies and the three/tsl names their bodies import. Only the
functions a program actually calls are emitted.
"""

from typing import Dict, List, Set

# =============================================================================
# INDIVIDUAL TSL FUNCTIONS WITH DEPENDENCIES
# =============================================================================

TSL_FUNCTIONS: Dict[str, Dict] = {
    'permute': {
        'code': '''
const permute = Fn(([x]) => mod(x.mul(34).add(1).mul(x), 289));''',
        'deps': [],
        'imports': ['Fn', 'mod'],
    },
    # Returns 0..1
    'simplexNoise2D': {
        'code': '''
const simplexNoise2D = Fn(([v]) => {
    const C = vec4(0.211324865405187, 0.366025403784439, -0.577350269189626, 0.024390243902439);

    const i = floor(v.add(dot(v, vec2(C.y, C.y))));
    const x0 = v.sub(i).add(dot(i, vec2(C.x, C.x)));

    const i1x = step(x0.y, x0.x);
    const i1y = float(1).sub(i1x);

    const x1 = x0.sub(vec2(i1x, i1y)).add(C.x);
    const x2 = x0.add(C.z);

    const ii = mod(i, 289);
    const p = permute(
        permute(vec3(ii.y, ii.y.add(i1y), ii.y.add(1)))
            .add(vec3(ii.x, ii.x.add(i1x), ii.x.add(1)))
    );

    const m = max(float(0.5).sub(vec3(dot(x0, x0), dot(x1, x1), dot(x2, x2))), 0);
    const m4 = m.mul(m).mul(m).mul(m);

    const x_grad = fract(p.mul(C.w)).mul(2).sub(1);
    const h = abs(x_grad).sub(0.5);
    const ox = floor(x_grad.add(0.5));
    const a0 = x_grad.sub(ox);

    const m4_norm = m4.mul(float(1.79284291400159).sub(float(0.85373472095314).mul(a0.mul(a0).add(h.mul(h)))));

    const g = vec3(
        a0.x.mul(x0.x).add(h.x.mul(x0.y)),
        a0.y.mul(x1.x).add(h.y.mul(x1.y)),
        a0.z.mul(x2.x).add(h.z.mul(x2.y))
    );

    return float(130).mul(dot(m4_norm, g)).mul(0.5).add(0.5);
});''',
        'deps': ['permute'],
        'imports': ['Fn', 'vec2', 'vec3', 'vec4', 'float', 'floor', 'fract', 'dot', 'max', 'abs', 'mod', 'step'],
    },
}


def resolve_dependencies(func_names: Set[str]) -> List[str]:
    """
    Given a set of required function names, returns an ordered list
    including all transitive dependencies (dependencies first).
    """
    resolved: List[str] = []
    seen: Set[str] = set()

    def visit(name: str):
        if name in seen:
            return
        if name not in TSL_FUNCTIONS:
            # Unknown function - assume three/tsl provides it
            return
        seen.add(name)

        for dep in TSL_FUNCTIONS[name]['deps']:
            visit(dep)

        resolved.append(name)

    for name in sorted(func_names):
        visit(name)

    return resolved


def get_functions_code(func_names: Set[str]) -> str:
    """
    Given a set of required function names, returns TSL code
    with all functions and their dependencies in correct order.
    """
    ordered = resolve_dependencies(func_names)
    return '\n'.join(TSL_FUNCTIONS[name]['code'].strip('\n') for name in ordered)


def get_functions_imports(func_names: Set[str]) -> Set[str]:
    """three/tsl names used by the bodies of the required functions."""
    names: Set[str] = set()
    for name in resolve_dependencies(func_names):
        names.update(TSL_FUNCTIONS[name]['imports'])
    return names
