
#
# GLSL sources.  Every program shares the Transform block at binding point 0,
#   laid out std140 as three column-major mat4s: projection, view, model.
#

PLANE_VERTEX = """
#version 330 core

layout(std140) uniform Transform {
    mat4 projection;
    mat4 view;
    mat4 model;
};

layout(location = 0) in vec2 position;
layout(location = 1) in vec2 uv;
layout(location = 2) in vec4 color;
layout(location = 3) in vec4 weight;

out vec2 v_uv;
out vec4 v_color;
out vec4 v_weight;

void main() {
    v_uv        = uv;
    v_color     = color;
    v_weight    = weight;
    gl_Position = projection * view * model * vec4(position, 0.0, 1.0);
}
"""

PLANE_FRAGMENT = """
#version 330 core

uniform sampler2D image;

in vec2 v_uv;
in vec4 v_color;
in vec4 v_weight;

out vec4 frag_color;

const vec4  OUTLINE       = vec4(1.0, 0.2, 0.2, 1.0);
const float OUTLINE_WIDTH = 0.002;

void main() {
    vec4  texel = texture(image, v_uv) * v_color;
    float edge  = min(min(v_uv.x, 1.0 - v_uv.x), min(v_uv.y, 1.0 - v_uv.y));
    // weight.x is 1 along the plane border and falls off towards the interior.
    frag_color = mix(texel, OUTLINE, v_weight.x * (1.0 - step(OUTLINE_WIDTH, edge)));
}
"""

# Handle markers: the same unit plane, drawn with an identity view and a model
#   matrix that places it on the handle.  The ring is cut out of the uv square.
HANDLE_VERTEX = PLANE_VERTEX

HANDLE_FRAGMENT = """
#version 330 core

uniform sampler2D image;

in vec2 v_uv;
in vec4 v_color;
in vec4 v_weight;

out vec4 frag_color;

void main() {
    float r = length(v_uv * 2.0 - 1.0);
    if (r > 1.0 || r < 0.7) {
        discard;
    }
    frag_color = vec4(1.0, 0.6, 0.0, 1.0) * v_color;
}
"""
